"""
Experiment Module

This module implements a collection of independent trials, used to gather
statistics about how well the evolutionary loop performs across runs.
Trials can run serially or in parallel processes, using joblib.

Classes:
    Experiment: Runs several seeded Trials and aggregates their results
"""

from joblib     import Parallel, delayed
from statistics import mean
from sys        import stdout
from typing     import Type

from evomaze.run.config import Config
from evomaze.run.trial  import Trial

class Experiment:
    """
    A collection of independent trials.

    Trial number n (1-indexed) is seeded with 'base_seed + n', or draws fresh
    entropy when no base seed is given, so an experiment with a base seed is
    reproducible whether its trials run serially or in parallel.

    A trial counts as a success when its scores reached the fitness threshold
    (see Trial); with 'fitness_termination_check' off no trial succeeds and
    only the score statistics are meaningful.

    Subclasses can override:
    - _prepare_trial(trial, trial_number):          Configure each trial before execution
    - _extract_trial_results(trial, trial_number):  Extract results after a trial completes
    - _analyze_trial_results(results):              Process and display individual trial results
    - _final_report():                              Produce the aggregated report

    Public Properties:
        results: The results of every trial of the last run, in trial order

    Public Methods:
        run(num_jobs=1): Execute the complete experiment
        summary():       Aggregated statistics of the last run

    Parallelization:
        num_jobs=1:  Serial trial execution (no parallelization)
        num_jobs>1:  Use specified number of parallel processes
        num_jobs=-1: Use all available CPU cores
    """

    def __init__(self, num_trials: int, config: Config,
                 base_seed: int | None = None, trial_class: Type[Trial] = Trial):
        """
        Parameters:
            num_trials:  how many independent trials to run (at least one)
            config:      configuration shared by every trial
            base_seed:   seed from which the seed of every trial is derived;
                         'config.seed' if None
            trial_class: Trial subclass instantiated for each run
        """
        if num_trials < 1:
            raise ValueError(f"An experiment needs at least one trial, got {num_trials}")

        self._num_trials : int         = num_trials
        self._config     : Config      = config
        self._base_seed  : int | None  = base_seed if base_seed is not None else config.seed
        self._trial_class: Type[Trial] = trial_class

        # progress counters
        self._trial_counter  : int = 0  # trials completed in the current run
        self._success_counter: int = 0  # how many trials reached the fitness threshold

        # per-trial statistics
        self._results            : list[dict]  = []
        self._best_scores        : list[float] = []  # best score achieved in trial
        self._success_generations: list[int]   = []  # length of successful trials, in generations

    @property
    def results(self) -> list[dict]:
        return self._results

    def _reset(self):
        """
        Clear the counters and statistics of a previous run.
        """
        self._trial_counter       = 0
        self._success_counter     = 0
        self._results             = []
        self._best_scores         = []
        self._success_generations = []

    def run(self, num_jobs: int = 1):
        """
        Run the experiment.

        Clears any previous results, then plays every trial and prints the reports.

        Parameters:
            num_jobs: Number of parallel processes for running trials
                       1 = serial trial execution (default)
                      -1 = use all available CPU cores
                      >1 = use specified number of processes
        """
        self._reset()

        # Play the trials, serially or in worker processes
        serialize = num_jobs == 1

        if serialize:
            results = []
            while self._trial_counter < self._num_trials:
                self._trial_counter += 1
                results.append(self._run_trial(self._trial_counter))
        else:
            results = Parallel(num_jobs)(
                delayed(self._run_trial)(n) for n in range(1, self._num_trials + 1)
            )
            self._trial_counter = self._num_trials

        # Results come back in trial order either way
        for r in results:
            self._analyze_trial_results(r)
        self._final_report()

    def _trial_seed(self, trial_number: int) -> int | None:
        if self._base_seed is None:
            return None
        return self._base_seed + trial_number

    def _run_trial(self, trial_number: int) -> dict:
        """
        Build, prepare and run trial number 'trial_number',
        returning the results extracted from it.

        Parameters:
            trial_number: The trial number (1-indexed)
        """
        trial = self._trial_class(self._config, seed=self._trial_seed(trial_number), suppress_output=True)

        self._prepare_trial(trial, trial_number)
        trial.run()

        return self._extract_trial_results(trial, trial_number)

    def _prepare_trial(self, trial: Trial, trial_number: int):
        """
        Configure the next trial; this implementation prints a progress line.
        """
        s = f"Starting trial {trial_number:03d} of {self._num_trials}..."
        stdout.write(s + '\r')
        stdout.flush()

    def _extract_trial_results(self, trial: Trial, trial_number: int) -> dict:
        """
        Collect the figures reported for a finished trial.
        """
        results = {"trial_number": trial_number}

        # for how many generations did the trial run
        results["number_generations"] = trial.generation_counter

        # the best score achieved
        results["best_score"] = trial.best_score

        # whether the fitness threshold was reached during this trial
        results["success"] = not trial.failed

        return results

    def _analyze_trial_results(self, results: dict):
        """
        Update the statistics with the results of one trial, and print them.
        """
        self._results.append(results)
        self._best_scores.append(results["best_score"])
        if results["success"]:
            self._success_counter += 1
            self._success_generations.append(results["number_generations"])

        # print trial summary
        s  = f"Trial {results['trial_number']:03d}: "
        s += f"best score={results['best_score']:.2f}, "
        s += f"generations={results['number_generations']:3} "
        s += "[SUCCESS]" if results['success'] else "[FAILED]"
        print(s)

    def _final_report(self):
        """
        Print the statistics aggregated over all trials.
        """
        success_rate = self._success_counter / self._trial_counter

        s  = "\nSUMMARY:\n"
        s += f"Total trials          = {self._trial_counter}\n"
        s += f"Success rate          = {100*success_rate:.0f}%\n"
        s += f"Avg best score        = {mean(self._best_scores):.2f}\n"
        s += f"Max best score        = {max(self._best_scores):.2f}\n"

        if self._success_generations:
            s += f"Avg # generations     = {mean(self._success_generations):.0f}\n"
        else:
            s += "No successful trials - cannot compute generation statistics\n"
        print(s)

    def summary(self) -> dict:
        """
        Aggregated statistics of the last run.
        """
        return {
            "num_trials"         : self._trial_counter,
            "success_rate"       : self._success_counter / self._trial_counter if self._trial_counter else 0.0,
            "mean_best_score"    : mean(self._best_scores) if self._best_scores else 0.0,
            "mean_generations_to_success":
                mean(self._success_generations) if self._success_generations else None,
        }

"""
Trial Module

This module implements a headless run of the evolutionary loop. A trial
drives a GenerationController with a fixed frame length, as a host would do
at its frame rate but without rendering, until a maximum number of generations
has been played or the scores of a generation reach a target threshold.

Classes:
    GenerationRecord: Statistics of one completed generation
    Trial:            One independent run of the evolutionary loop
"""

import numpy as np
from statistics import mean
from typing     import NamedTuple

from evomaze.run.config     import Config
from evomaze.run.controller import GenerationController

class GenerationRecord(NamedTuple):
    generation: int    # number of the generation (1 for the first one played)
    best      : float  # best final score of the generation
    mean      : float  # mean final score of the generation
    min       : float  # worst final score of the generation
    best_ever : float  # best final score of any generation so far
    deaths    : int    # Episodes ended by a pursuer (the rest ran out of time)

class Trial:
    """
    One independent run of the evolutionary loop, without a display.

    The trial owns a GenerationController and calls its 'tick' method with a
    frame length of 'frame_seconds' until the trial terminates, recording the
    statistics of every generation.

    Subclasses can override:
    - _report_progress(): Display progress after each generation
    - _final_report():    Display results at the end of the trial
    - _terminate():       Custom termination logic (default: max generations + fitness threshold)

    Public Properties:
        history:            The GenerationRecord of every generation played
        generation_counter: Number of generations played
        best_score:         Best final score of any generation
        controller:         The GenerationController of the last run

    Public Methods:
        run(): Execute a complete trial
    """

    def __init__(self, config: Config, seed: int | None = None, suppress_output: bool = False):
        """
        Initialize the trial.

        Parameters:
            config:          Configuration parameters
            seed:            Seed of the trial's random generator; 'config.seed' if None
            suppress_output: If True, suppress progress and final reports
                             (useful when running multiple trials in experiments)
        """
        self._config         : Config                      = config
        self._seed           : int | None                  = seed if seed is not None else config.seed
        self._suppress_output: bool                        = suppress_output
        self._controller     : GenerationController | None = None
        self._history        : list[GenerationRecord]      = []
        self.failed          : bool                        = True

    @property
    def history(self) -> list[GenerationRecord]:
        return self._history

    @property
    def generation_counter(self) -> int:
        return len(self._history)

    @property
    def best_score(self) -> float:
        return self._history[-1].best_ever if self._history else 0.0

    @property
    def controller(self) -> GenerationController | None:
        return self._controller

    def run(self) -> list[GenerationRecord]:
        """
        Run the trial.

        Resets the trial state, then plays generations until the terminate
        condition is met.

        Returns:
            The GenerationRecord of every generation played
        """
        self._reset()

        self._controller = GenerationController(self._config,
                                                np.random.default_rng(self._seed),
                                                on_generation_complete=self._on_generation_complete)
        self._controller.start()

        while not self._terminate():
            self._controller.tick(self._config.frame_seconds)

        self._controller.pause()

        if not self._suppress_output:
            self._final_report()

        return self._history

    def _reset(self):
        self._controller = None
        self._history    = []
        self.failed      = True

    def _on_generation_complete(self, generation: int, best_ever: float):
        """
        Record the statistics of the generation that has just been played.
        """
        finished = self._controller.finished_episodes
        scores   = [episode.get_score() for episode in finished]
        deaths   = sum(1 for episode in finished if not episode.timed_out())

        record = GenerationRecord(generation=generation,
                                  best=max(scores),
                                  mean=mean(scores),
                                  min=min(scores),
                                  best_ever=best_ever,
                                  deaths=deaths)
        self._history.append(record)

        if not self._suppress_output:
            self._report_progress()

    def _report_progress(self):
        """
        Print a report describing the generation just played.

        This method is suppressed by setting 'self._suppress_output' to 'True',
        which we might do when running many trials, as part of an experiment.
        """
        record = self._history[-1]

        s  = f"===============\n"
        s += f"GENERATION {record.generation:04d}\n"
        s += f"population size = {self._config.population_size}\n"
        s += f"best score      = {record.best:.2f}\n"
        s += f"mean score      = {record.mean:.2f}\n"
        s += f"worst score     = {record.min:.2f}\n"
        s += f"best ever       = {record.best_ever:.2f}\n"
        s += f"deaths/timeouts = {record.deaths}/{self._config.population_size - record.deaths}\n"
        print(s)

    def _final_report(self):
        """
        Display results at the end of the trial.

        This method is suppressed by setting 'self._suppress_output' to 'True',
        which we might do when running many trials, as part of an experiment.
        """
        s  = "\nTRIAL COMPLETE:\n"
        s += f"Generations played = {self.generation_counter}\n"
        s += f"Best score         = {self.best_score:.2f}\n"
        if self._config.fitness_termination_check:
            s += "Threshold reached  = " + ("no" if self.failed else "yes") + "\n"
        print(s)

    def _terminate(self) -> bool:
        """
        Determine whether the trial should terminate.

        This default implementation stops the trial after a maximum number
        of generations and (optionally) also stops it if a given measure of
        the scores of the last generation has reached a given threshold.

        Returns:
            bool: True if the trial should stop, False otherwise
        """
        # Has this trial run for too long?
        terminate = self.generation_counter >= self._config.max_generations

        # Check whether the scores have reached a target threshold
        if self._config.fitness_termination_check and self._history:
            record = self._history[-1]
            overall_fitness = record.best if self._config.fitness_criterion == "max" else record.mean

            success   = overall_fitness >= self._config.fitness_threshold
            terminate = terminate or success

            if terminate:
                self.failed = not success

        return terminate

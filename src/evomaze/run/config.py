import configparser
import os

class Config:

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a default Config.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config holding the default values,
                         whose attributes can then be set manually.
        """
        parser = None
        if config_file is not None:
            if not os.path.exists(config_file):
                raise FileNotFoundError(f"Configuration file '{config_file}' not found")
            parser = configparser.ConfigParser()
            parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values.
        # Without a file every option takes its default value.
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            if parser is None:
                return default
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == list:
                    return [int(size.strip()) for size in raw_value.split(',') if size.strip()]
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise

        # [POPULATION]

        # The number of Brains in each generation; this is also the
        # number of Episodes played side by side in each generation.
        self.population_size = get_value('POPULATION', 'population_size', int, default=16)

        # The number of neurons in each layer of every Brain, input layer first.
        # The input layer must match the sensor vector (4 directions x 4 features)
        # and the output layer the four movement directions.
        self.layer_sizes = get_value('POPULATION', 'layer_sizes', list, default=[16, 12, 4])

        # The activation functions of the hidden layers and of the output layer.
        # For the list of all available choices, see the 'activations' module.
        self.hidden_activation = get_value('POPULATION', 'hidden_activation', str, default='relu')
        self.output_activation = get_value('POPULATION', 'output_activation', str, default='sigmoid')

        # [REPRODUCTION]

        # The probability that mutation perturbs any single weight or bias.
        self.mutation_rate = get_value('REPRODUCTION', 'mutation_rate', float, default=0.1)

        # Perturbations are drawn uniformly from [-mutation_amount, mutation_amount].
        self.mutation_amount = get_value('REPRODUCTION', 'mutation_amount', float, default=0.2)

        # The probability that an offspring is produced by crossover
        # (otherwise it is a clone of one of its two parents).
        self.crossover_rate = get_value('REPRODUCTION', 'crossover_rate', float, default=0.3)

        # The number of fittest Brains copied unchanged into the next generation.
        self.elitism = get_value('REPRODUCTION', 'elitism', int, default=4)

        # The number of individuals sampled for each tournament selection.
        self.tournament_size = get_value('REPRODUCTION', 'tournament_size', int, default=3)

        # [MAZE]

        # The probability that a wall anchor is placed at a lattice point,
        # and the spacing (in cells) between lattice points.
        self.wall_probability = get_value('MAZE', 'wall_probability', float, default=0.25)
        self.anchor_spacing   = get_value('MAZE', 'anchor_spacing',   int,   default=2)

        # Cells within this (Chebyshev) radius of the spawn cell are always open.
        self.spawn_clear_radius = get_value('MAZE', 'spawn_clear_radius', int, default=1)

        # The probability that an open cell receives a dot,
        # and the number of bonus items placed in each maze.
        self.dot_probability = get_value('MAZE', 'dot_probability', float, default=0.9)
        self.bonus_count     = get_value('MAZE', 'bonus_count',     int,   default=5)

        # [AGENT]

        # How many cells the agent sees in each of the four directions.
        self.vision_range = get_value('AGENT', 'vision_range', int, default=5)

        # Distance covered in one simulation step, and half the side of the
        # square collision footprint, both as fractions of a cell.
        self.agent_speed      = get_value('AGENT', 'agent_speed',      float, default=0.1)
        self.collision_radius = get_value('AGENT', 'collision_radius', float, default=0.4)

        # Movement below this many pixels (on both axes) counts as standing still.
        # After 'idle_grace_period' seconds of standing still the score decreases
        # by 'idle_penalty_rate' per second; moving earns 'movement_reward_rate' per second.
        self.stationary_epsilon   = get_value('AGENT', 'stationary_epsilon',   float, default=0.1)
        self.idle_grace_period    = get_value('AGENT', 'idle_grace_period',    float, default=0.5)
        self.idle_penalty_rate    = get_value('AGENT', 'idle_penalty_rate',    float, default=10.0)
        self.movement_reward_rate = get_value('AGENT', 'movement_reward_rate', float, default=1.0)

        # Loop detection: revisiting the same cell 'loop_threshold' times within
        # the last 'loop_window' visited cells costs 'loop_penalty'.
        self.loop_window    = get_value('AGENT', 'loop_window',    int,   default=20)
        self.loop_threshold = get_value('AGENT', 'loop_threshold', int,   default=4)
        self.loop_penalty   = get_value('AGENT', 'loop_penalty',   float, default=5.0)

        # Reward shaping on the Manhattan distance to the nearest dot or bonus item.
        self.approach_reward    = get_value('AGENT', 'approach_reward',    float, default=1.0)
        self.retreat_penalty    = get_value('AGENT', 'retreat_penalty',    float, default=0.5)
        self.distance_tolerance = get_value('AGENT', 'distance_tolerance', float, default=0.1)

        # Fixed rewards and penalties.
        self.wall_bump_penalty = get_value('AGENT', 'wall_bump_penalty', float, default=1.0)
        self.dot_reward        = get_value('AGENT', 'dot_reward',        float, default=20.0)
        self.bonus_reward      = get_value('AGENT', 'bonus_reward',      float, default=100.0)
        self.pursuer_reward    = get_value('AGENT', 'pursuer_reward',    float, default=500.0)
        self.death_penalty     = get_value('AGENT', 'death_penalty',     float, default=100.0)

        # How long (seconds) a bonus item keeps the agent powered up.
        self.power_duration = get_value('AGENT', 'power_duration', float, default=10.0)

        # [PURSUER]

        # Pursuers move once every 'move_interval' seconds, and decide on a new
        # direction when within 'center_tolerance' (cell fraction) of a cell centre.
        self.move_interval    = get_value('PURSUER', 'move_interval',    float, default=0.05)
        self.center_tolerance = get_value('PURSUER', 'center_tolerance', float, default=0.1)

        # Scatter mode lasts a random time between 'scatter_min' and 'scatter_max'
        # seconds; outside scatter mode it is entered with 'scatter_probability' per step.
        self.scatter_min         = get_value('PURSUER', 'scatter_min',         float, default=5.0)
        self.scatter_max         = get_value('PURSUER', 'scatter_max',         float, default=10.0)
        self.scatter_probability = get_value('PURSUER', 'scatter_probability', float, default=0.001)

        # How many cells ahead of the agent the intercepting pursuer aims, and
        # the probability that the noisy and mixed pursuers move at random.
        self.intercept_lookahead = get_value('PURSUER', 'intercept_lookahead', int,   default=4)
        self.chase_noise         = get_value('PURSUER', 'chase_noise',         float, default=0.3)
        self.mixed_noise         = get_value('PURSUER', 'mixed_noise',         float, default=0.4)

        # Distance covered in one move by each kind of pursuer, as a fraction of a cell.
        self.speed_direct    = get_value('PURSUER', 'speed_direct',    float, default=0.09)
        self.speed_intercept = get_value('PURSUER', 'speed_intercept', float, default=0.08)
        self.speed_noisy     = get_value('PURSUER', 'speed_noisy',     float, default=0.07)
        self.speed_mixed     = get_value('PURSUER', 'speed_mixed',     float, default=0.06)

        # [EPISODE]

        # The size (pixels) of the surface an Episode is played on; it determines
        # the cell size and therefore the number of cells of the maze.
        self.surface_width  = get_value('EPISODE', 'surface_width',  int, default=400)
        self.surface_height = get_value('EPISODE', 'surface_height', int, default=400)
        self.min_surface    = get_value('EPISODE', 'min_surface',    int, default=200)
        self.cells_across   = get_value('EPISODE', 'cells_across',   int, default=20)
        self.min_cell_size  = get_value('EPISODE', 'min_cell_size',  int, default=10)

        # Seconds of simulated time before an Episode ends, and the length of
        # one fixed simulation step (the delta of each tick is consumed in such steps).
        self.time_budget  = get_value('EPISODE', 'time_budget',  float, default=20.0)
        self.step_seconds = get_value('EPISODE', 'step_seconds', float, default=1.0 / 60.0)

        # [TERMINATION]

        # The number of generations after which a headless trial stops.
        self.max_generations = get_value('TERMINATION', 'max_generations', int, default=50)

        # Whether a trial also stops when the score of a generation (see below)
        # meets or exceeds 'fitness_threshold'.
        self.fitness_termination_check = get_value('TERMINATION', 'fitness_termination_check', bool, default=False)
        self.fitness_threshold         = get_value('TERMINATION', 'fitness_threshold',         float, default=None)

        # How the scores of a generation are combined before comparing them
        # against the threshold: 'max' (best score) or 'mean'.
        self.fitness_criterion = get_value('TERMINATION', 'fitness_criterion', str, default='max')

        # The frame length (seconds) with which a headless trial drives the simulation.
        self.frame_seconds = get_value('TERMINATION', 'frame_seconds', float, default=1.0 / 60.0)

        # [SEED]

        # Seed of the random generator; None draws fresh entropy.
        self.seed = get_value('SEED', 'seed', int, default=None)

        self._validate()

    def _validate(self):
        if self.layer_sizes is None or len(self.layer_sizes) < 2:
            raise ValueError("'layer_sizes' must list at least 2 layers")
        if self.population_size is None or self.population_size < 1:
            raise ValueError("'population_size' must be a positive integer")
        if self.elitism is None or self.elitism < 0:
            raise ValueError("'elitism' must be zero or a positive integer")
        if self.scatter_min > self.scatter_max:
            raise ValueError("'scatter_min' cannot exceed 'scatter_max'")
        if self.fitness_termination_check and self.fitness_threshold is None:
            raise ValueError("'fitness_threshold' is required when 'fitness_termination_check' is True")
        if self.step_seconds <= 0 or self.frame_seconds <= 0:
            raise ValueError("'step_seconds' and 'frame_seconds' must be positive")
        if self.fitness_criterion not in ('max', 'mean'):
            raise ValueError(f"'fitness_criterion' must be 'max' or 'mean', got '{self.fitness_criterion}'")

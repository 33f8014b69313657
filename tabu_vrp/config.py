# Configuration parameters for the Tabu VRP solver

# Tabu Search Configuration
TABU_CONFIG = {
    'tabu_capacity': 50,          # Maximum number of solutions held in tabu memory (T)
    'max_iterations': 500,        # Number of tabu iterations (M)
    'neighborhood_size': 30,      # Candidate solutions generated per iteration (N)
    'transformation': 'swap',     # swap / shift_insert / inversion / two_opt
    'neighborhood_kind': 'basic', # basic / complex (complex requires swap)
    'meta_exchange_attempts': 40, # Random exchanges tried per route pair (complex neighborhood)
    'meta_exchange_probability': 0.5,  # Chance of meta-exchange instead of 2-opt per route
    'double_pass': False,         # Re-run tabu after splitting a single giant route
    'seed': None,                 # Random seed (None = nondeterministic)
    'log_every': 100,             # Progress log interval in iterations (0 = off)
}

# Tabu Preset Configurations
TABU_PRESETS = {
    'fast': {
        'tabu_capacity': 20,
        'max_iterations': 100,
        'neighborhood_size': 10,
    },
    'standard': {
        'tabu_capacity': 50,
        'max_iterations': 500,
        'neighborhood_size': 30,
    },
    'intensive': {
        # Larger memory and neighborhoods, use for final runs
        'tabu_capacity': 200,
        'max_iterations': 3000,
        'neighborhood_size': 60,
    },
}

# VRP Problem Configuration
VRP_CONFIG = {
    'vehicle_capacity': 100,     # Default vehicle capacity (Q)
    'depot_id': 0,               # Depot node ID
}

# Random instance generation
GENERATOR_CONFIG = {
    'n_customers': 30,
    'area_bounds': (0, 100),     # Square area [0,100]x[0,100]
    'demand_min': 1,
    'demand_max': 20,
    'depot_position': 'center',  # center / corner
    'seed': 42,
}

# Visualization Configuration
VIZ_CONFIG = {
    'figure_size': (10, 8),
    'dpi': 150,
    'marker_size': 40,
    'line_width': 1.5,
    'font_size': 11,
}

# File Paths
PATHS = {
    'data_raw': 'data/raw/',
    'results': 'results/',
    'logs': 'logs/',
}

def clean_config(chain_config):
    """
    Cleans the run configuration and sets defaults.
    All config keys use lowercase with underscores.
    """

    # Define Defaults and retrieve values from dictionary (all lowercase)
    chain_config.setdefault('rng_seed', 0)
    chain_config.setdefault('burn_in', 0)
    chain_config.setdefault('num_samples', 1000)
    chain_config.setdefault('use_cache', True)
    chain_config.setdefault('cache_capacity', 1000)
    chain_config.setdefault('log_every', 0)

    return chain_config

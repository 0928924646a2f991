"""Domain-specific library modules.

Modules here import trackbridge domain models and provide higher-level
logic (candidate matching). Pure utilities that don't depend on domain
models live in ``trackbridge.utils`` instead.

Consumers should import directly from submodules::

    from trackbridge.lib.matching import find_best_candidate
"""

"""
toptuinen - Calculatie core for hoveniers

Voorcalculatie and nacalculatie for garden construction and maintenance work.

Modules:
    core        - Shared services (config, logging, output)
    calculatie  - Estimation engine, variance engine, forecasting, catalogs
    cli         - Command line entry point
"""

__version__ = "0.1.0"

"""Process exit codes for the toolenv CLI."""

EXIT_SUCCESS = 0
EXIT_PROVISION_FAILURE = 1
EXIT_INVALID_USAGE = 2
EXIT_CONFIG_ERROR = 3

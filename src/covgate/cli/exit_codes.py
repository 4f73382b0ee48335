# mirror <sysexits.h> for errors; violations use the plain failure status
EXIT_OK = 0  # Normal success
EXIT_THRESHOLD = 1  # Coverage below at least one threshold
EXIT_DATAERR = 65  # Input data was invalid (e.g., malformed coverage JSON)
EXIT_NOINPUT = 66  # Input file not found (e.g., coverage-final.json missing)
EXIT_SOFTWARE = 70  # Unexpected internal failure
EXIT_CONFIG = 78  # Invalid configuration (e.g., bad [tool.covgate] table)

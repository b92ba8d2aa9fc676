"""AT command builders and response-frame parsers, one module per domain."""

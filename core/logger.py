import logging

# shared application logger; handlers are attached by core.logging.setup_logging()
log = logging.getLogger("billing")

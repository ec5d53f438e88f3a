# module shop.app
import logging
import os

from shop.app_setup.factory import create_app

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())

# App globale
app = create_app()

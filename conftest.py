"""
Configuration file for pytest.

Loads environment variables from a local .env file before the tests run.
"""
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

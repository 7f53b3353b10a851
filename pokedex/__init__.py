# Pokedex catalog client package
import os

from dotenv import load_dotenv

# .env next to the package wins over one found from the working directory
load_dotenv(dotenv_path=os.path.join(os.path.dirname(os.path.dirname(__file__)), ".env"))
load_dotenv()

"""
solomon_draft/configuration.py
User configuration, stored as JSON in the OS-specific config folder.
"""

import json
import os
import sys
from typing import Optional, Tuple
import pydantic
from pydantic import BaseModel, Field
from solomon_draft import constants
from solomon_draft.logger import create_logger

logger = create_logger()

CONFIG_FILE_NAME = "config.json"


class DraftDefaults(BaseModel):
    pack_size: int = constants.DRAFT_PACK_SIZE_DEFAULT
    rounds: int = constants.DRAFT_ROUNDS_DEFAULT
    pack_size_min: int = constants.DRAFT_PACK_SIZE_MIN
    pack_size_max: int = constants.DRAFT_PACK_SIZE_MAX
    rounds_min: int = constants.DRAFT_ROUNDS_MIN
    rounds_max: int = constants.DRAFT_ROUNDS_MAX


class CatalogSettings(BaseModel):
    base_url: str = constants.URL_SCRYFALL_API
    requests_per_second: float = constants.SCRYFALL_REQUESTS_PER_SECOND
    burst: int = constants.SCRYFALL_BURST
    batch_size: int = Field(default=constants.SCRYFALL_COLLECTION_BATCH_SIZE, ge=1, le=75)
    timeout: float = constants.REQUEST_TIMEOUT
    max_throttle_retries: int = constants.SCRYFALL_MAX_THROTTLE_RETRIES
    retry_after_default: float = constants.SCRYFALL_RETRY_AFTER_DEFAULT


class DeckListSettings(BaseModel):
    timeout: float = constants.REQUEST_TIMEOUT


class Settings(BaseModel):
    log_folder: str = ""
    export_folder: str = ""


class Configuration(BaseModel):
    draft: DraftDefaults = Field(default_factory=DraftDefaults)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    deck_lists: DeckListSettings = Field(default_factory=DeckListSettings)
    settings: Settings = Field(default_factory=Settings)


def get_config_path() -> str:
    """Return the platform's location for config.json"""
    if sys.platform == "win32":
        base = os.environ.get("APPDATA", os.path.expanduser("~"))
    elif sys.platform == "darwin":
        base = os.path.expanduser("~/Library/Application Support")
    else:
        base = os.path.expanduser("~/.config")
    return os.path.join(base, constants.APPLICATION_NAME, CONFIG_FILE_NAME)


def read_configuration(file_location: Optional[str] = None) -> Tuple[Configuration, bool]:
    """Read the configuration file, falling back to defaults when it is missing or unreadable"""
    file_location = file_location or get_config_path()
    try:
        with open(file_location, "r", encoding="utf-8") as json_file:
            data = json.load(json_file)
        return Configuration.model_validate(data), True
    except FileNotFoundError:
        return Configuration(), False
    except (OSError, json.JSONDecodeError, pydantic.ValidationError) as error:
        logger.error("Unable to read configuration %s: %s", file_location, error)
        return Configuration(), False


def write_configuration(config: Configuration, file_location: Optional[str] = None) -> bool:
    file_location = file_location or get_config_path()
    try:
        folder = os.path.dirname(str(file_location))
        if folder and not os.path.exists(folder):
            os.makedirs(folder)
        with open(file_location, "w", encoding="utf-8") as json_file:
            json.dump(config.model_dump(), json_file, indent=4)
        return True
    except OSError as error:
        logger.error("Unable to write configuration %s: %s", file_location, error)
        return False


def reset_configuration(file_location: Optional[str] = None) -> bool:
    """Overwrite the configuration file with the defaults"""
    return write_configuration(Configuration(), file_location)

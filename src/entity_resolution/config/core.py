# entity_resolution/config/core.py

# Separator between ancestor and child names in a bag item full name
# (e.g. "address-city")
ITEM_SEPARATOR = "-"

# Separator used in event items and handler paths (e.g. "address.city.validate")
HANDLER_PATH_SEPARATOR = "."

# Event names with protocol semantics
EVENT_SHOULD_PROMPT = "shouldPrompt"
EVENT_VALIDATE = "validate"

# Handler tree sections
HANDLERS_ENTITY = "entity"
HANDLERS_ITEMS = "items"
HANDLERS_CUSTOM = "custom"

# Entity type keys
RECURRING_ENTITY_KEY = "DATE_TIME.RECURRING"
ITEM_TYPE_SUFFIX = "_ITEM"

# Variable created on the fly by set_variable
DEFAULT_VARIABLE = {"type": "string", "entity": False}

# Skill scope prefix for dialog 2.0 skill-scoped variables
SKILL_SCOPE = "skill"

# Malformed request error code
BAD_REQUEST_NAME = "badRequest"
BAD_REQUEST_CODE = "BOTS-1000"

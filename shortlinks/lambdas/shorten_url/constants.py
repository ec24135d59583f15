# Log event / error codes
MISSING_USER_ID = 'MISSING_USER_ID'
INVALID_JSON = 'INVALID_JSON'
MISSING_ORIGINAL_URL = 'MISSING_ORIGINAL_URL'
SHORT_URL_CREATED = 'SHORT_URL_CREATED'
SHORT_URL_ALREADY_EXISTS = 'SHORT_URL_ALREADY_EXISTS'
SHORTEN_URL_REJECTED = 'SHORTEN_URL_REJECTED'

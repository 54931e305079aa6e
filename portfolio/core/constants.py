"""Constantes partagées pour éviter les valeurs magiques dans le code.

Ce module regroupe les codes HTTP utilisés par l'API, les paramètres de retry des appels au
fournisseur d'embeddings et les bornes de pagination du catalogue.
"""

# Codes de statut HTTP courants
HTTP_STATUS_OK = 200
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_NOT_FOUND = 404
HTTP_STATUS_UNPROCESSABLE_ENTITY = 422
HTTP_STATUS_INTERNAL_SERVER_ERROR = 500

# Retry des embeddings (backoff exponentiel + jitter)
RETRY_BASE_DELAY = 0.5
RETRY_RANDOM_FACTOR = 0.25
RETRY_MAX_DELAY = 8.0

# Découpage et recherche
DEFAULT_CHUNK_SIZE = 1000
DEFAULT_SEARCH_LIMIT = 5
DEFAULT_SEARCH_THRESHOLD = 0.5
MAX_SEARCH_LIMIT = 50

# Statut de synchronisation (tolérance d'horloge pendant la transaction de sync)
STATUS_TOLERANCE_SECONDS = 5.0

# Pagination du catalogue
DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 6
MAX_PAGE_SIZE = 100
FILTER_ALL = "All"

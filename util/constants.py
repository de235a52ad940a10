class InternalURIs:
    API = "/api"
    TICKETS = API + "/tickets"
    STATUS = API + "/status"
    STATIC = "/static"
    INDEX = "/"
    HEALTHZ = "/healthz"


class ExternalURIs:
    QUAY_TAGS = "https://{host}/api/v1/repository/{namespace}/{repository}/tag/"

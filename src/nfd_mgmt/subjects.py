"""NATS subject constants and builder functions for forwarder management."""


class Subjects:
    """NATS subject definitions for the forwarder management endpoint."""

    # Face status dataset (request/reply)
    FACES_LIST = "nfd.faces.list"

    # Face event notifications (pub/sub)
    FACE_EVENTS = "nfd.faces.events"

    # Control commands (request/reply), e.g. "rib/register" -> "nfd.rib.register"
    @staticmethod
    def command(name: str) -> str:
        return "nfd." + ".".join(part for part in name.split("/") if part)

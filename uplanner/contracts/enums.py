"""Enumerations shared across all uplanner contracts."""

from enum import Enum


class ProcessingStatus(str, Enum):
    """Trajectory processing lifecycle of a flight plan."""
    UNPROCESSED = "unprocessed"
    QUEUED = "queued"
    PROCESSING = "processing"
    PROCESSED = "processed"
    ERROR = "error"


class AuthorizationStatus(str, Enum):
    """FAS authorization lifecycle of a flight plan.

    ``approved`` and ``denied`` are only ever written by the FAS callback.
    """
    NONE = "none"
    PENDING = "pending"
    APPROVED = "approved"
    DENIED = "denied"


class WorkflowStep(str, Enum):
    """Derived workflow step, never persisted."""
    SELECT = "select"
    DATETIME = "datetime"
    PROCESS = "process"
    GEOAWARENESS = "geoawareness"
    AUTHORIZE = "authorize"


class OperationKind(str, Enum):
    """Kinds of network operations tracked by the loading set."""
    PROCESSING = "processing"
    AUTHORIZING = "authorizing"
    RESETTING = "resetting"
    GEOAWARENESS = "geoawareness"
    DOWNLOADING = "downloading"
    RENAMING = "renaming"
    MOVING = "moving"
    DELETING = "deleting"


class TransitionKind(str, Enum):
    """Costly or irreversible transitions that require confirmation."""
    PROCESS = "process"
    RESET = "reset"
    AUTHORIZE = "authorize"


class GateVerdict(str, Enum):
    REJECTED_PRECONDITION = "rejected_precondition"
    NEEDS_CONFIRMATION = "needs_confirmation"
    PROCEED = "proceed"


class OutcomeKind(str, Enum):
    """Typed result of an orchestrated operation."""
    SUBMITTED = "submitted"
    READY = "ready"
    COMPLETED = "completed"
    NEEDS_CONFIRMATION = "needs_confirmation"
    NEEDS_AIRSPACE_SELECTION = "needs_airspace_selection"
    ALREADY_IN_FLIGHT = "already_in_flight"
    PRECONDITION_FAILED = "precondition_failed"
    VALIDATION_FAILED = "validation_failed"
    TRANSIENT_UNAVAILABLE = "transient_unavailable"
    SUBMISSION_FAILED = "submission_failed"
    VOLUME_GENERATION_FAILED = "volume_generation_failed"
    NETWORK_OR_UNKNOWN = "network_or_unknown"


# ---------------------------------------------------------------------------
# U-Plan value sets
# ---------------------------------------------------------------------------


class FlightMode(str, Enum):
    VLOS = "VLOS"
    BVLOS = "BVLOS"


class FlightCategory(str, Enum):
    OPEN_A1 = "OPENA1"
    OPEN_A2 = "OPENA2"
    OPEN_A3 = "OPENA3"
    SAIL_I_II = "SAIL_I-II"
    SAIL_III_IV = "SAIL_III-IV"
    SAIL_V_VI = "SAIL_V-VI"
    CERTIFIED_NO_PASSENGERS = "Certi_No_Pass"
    CERTIFIED_PASSENGERS = "Certi_Pass"


class SpecialOperation(str, Enum):
    NONE = ""
    POLICE_AND_CUSTOMS = "POLICE_AND_CUSTOMS"
    TRAFFIC_SURVEILLANCE_AND_PURSUIT = "TRAFFIC_SURVEILLANCE_AND_PURSUIT"
    ENVIRONMENTAL_CONTROL = "ENVIRONMENTAL_CONTROL"
    SEARCH_AND_RESCUE = "SEARCH_AND_RESCUE"
    MEDICAL = "MEDICAL"
    EVACUATIONS = "EVACUATIONS"
    FIREFIGHTING = "FIREFIGHTING"
    STATE_OFFICIALS = "STATE_OFFICIALS"


class Connectivity(str, Enum):
    RF = "RF"
    LTE = "LTE"
    SAT = "SAT"
    FIVE_G = "5G"


class IdTechnology(str, Enum):
    NRID = "NRID"
    ADSB = "ADSB"
    OTHER = "OTHER"


class UasType(str, Enum):
    NONE_NOT_DECLARED = "NONE_NOT_DECLARED"
    MULTIROTOR = "MULTIROTOR"
    FIXED_WING = "FIXED_WING"


class UasClass(str, Enum):
    NONE = "NONE"
    C0 = "C0"
    C1 = "C1"
    C2 = "C2"
    C3 = "C3"
    C4 = "C4"
    C5 = "C5"
    C6 = "C6"


class UasDimension(str, Enum):
    LT_1 = "LT_1"
    LT_3 = "LT_3"
    LT_8 = "LT_8"
    GTE_8 = "GTE_8"


class UplanState(str, Enum):
    SENT = "SENT"
    PROCESSING = "PROCESSING"
    ACCEPTED = "ACCEPTED"
    ACTIVATED = "ACTIVATED"
    WITHDRAWN = "WITHDRAWN"
    ENDED = "ENDED"


class AltitudeReference(str, Enum):
    AGL = "AGL"


class AltitudeUom(str, Enum):
    M = "M"
    FT = "FT"

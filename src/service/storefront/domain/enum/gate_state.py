from enum import StrEnum


class GateState(StrEnum):
    CHECKING_ACCESS = 'checking_access'
    REDIRECTED = 'redirected'
    SCANNING = 'scanning'
    VERIFYING = 'verifying'
    SHOWING_RESULT = 'showing_result'
    NETWORK_ERROR = 'network_error'


class GateDecision(StrEnum):
    GRANTED = 'granted'
    DENIED = 'denied'

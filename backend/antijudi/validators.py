"""Request validators."""
from antijudi.errors import ErrorCode, GameError
from antijudi.protocol import SpinRequest


def validate_bet(request: SpinRequest) -> None:
    """
    Validate bet amount.

    Raises INVALID_BET if bet is not positive. Any positive integer is
    accepted, not just the UI presets.
    """
    if request.bet <= 0:
        raise GameError(
            ErrorCode.INVALID_BET,
            f"Bet must be a positive integer, got {request.bet}.",
        )


def validate_spin_request(request: SpinRequest) -> None:
    """Run all validations on spin request."""
    validate_bet(request)

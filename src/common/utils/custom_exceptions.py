class HotelBookingError(Exception):
    status_code = 400


class InvalidInput(HotelBookingError):
    pass


class InvalidDates(InvalidInput):
    pass


class InvalidStatusTransition(InvalidInput):
    pass


class IncorrectCredentials(HotelBookingError):
    status_code = 401


class Unauthorized(HotelBookingError):
    status_code = 403


class NotFoundException(HotelBookingError):
    def __init__(self, resource: str, identifier: str, status_code: int = 404):
        super().__init__(resource, identifier)
        self.resource = resource
        self.identifier = identifier
        self.status_code = status_code

    def __str__(self):
        return f"{self.resource} '{self.identifier}' not found"


class RoomUnavailable(HotelBookingError):
    status_code = 409


class AlreadyPaid(HotelBookingError):
    status_code = 409


class PaymentInProgress(HotelBookingError):
    status_code = 409


class DuplicateReview(HotelBookingError):
    status_code = 409


class NotEligible(HotelBookingError):
    status_code = 400


class GatewayFailure(HotelBookingError):
    status_code = 402


class HotelAlreadyRegistered(HotelBookingError):
    status_code = 409


class UserAlreadyExists(HotelBookingError):
    status_code = 409

from errors import ConflictError, DataIntegrityError, NotFoundError, RentalError, ValidationError


def test_errors_fall_back_to_default_message():
    assert RentalError().message == "Rental operation failed"
    assert NotFoundError().message == "Resource not found"
    assert str(ValidationError()) == "Invalid input"


def test_errors_keep_given_message_and_status():
    error = ConflictError("Vehicle is in maintenance")

    assert error.message == "Vehicle is in maintenance"
    assert error.status_code == 409
    assert DataIntegrityError().status_code == 422

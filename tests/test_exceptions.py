"""Tests for the exception hierarchy."""

from neo_rbac.exceptions import (
    NeoException,
    ValidationError,
    NotFoundError,
    ConflictError,
    ForbiddenError,
    UnauthorizedError,
    DatabaseError,
)


class TestExceptions:
    
    def test_status_codes(self):
        assert ValidationError().status_code == 400
        assert UnauthorizedError().status_code == 401
        assert ForbiddenError().status_code == 403
        assert NotFoundError().status_code == 404
        assert ConflictError().status_code == 409
        assert DatabaseError().status_code == 500
    
    def test_every_error_is_a_neo_exception(self):
        for error in (ValidationError(), NotFoundError(), ConflictError(), DatabaseError()):
            assert isinstance(error, NeoException)
    
    def test_not_found_message_from_resource(self):
        assert NotFoundError(resource="Role", identifier=3).message == "Role with ID 3 not found"
        assert NotFoundError(resource="Role").message == "Role not found"
        assert NotFoundError("User not found", resource="User").message == "User not found"
    
    def test_validation_error_details(self):
        error = ValidationError(field="code", value=12)
        
        assert error.to_dict() == {
            "code": "ValidationError",
            "message": "Validation failed",
            "details": {"field": "code", "value": "12"},
        }
    
    def test_status_override(self):
        assert NeoException("teapot", status_code=418).status_code == 418
        assert NeoException("default").status_code == 500

from django.test import SimpleTestCase

from apps.core.exceptions import (
    AuthError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)


class ExceptionTaxonomyTest(SimpleTestCase):

    def test_status_codes(self):
        self.assertEqual(ValidationError("x").status_code, 400)
        self.assertEqual(ConflictError("x").status_code, 400)
        self.assertEqual(AuthError("x").status_code, 401)
        self.assertEqual(ForbiddenError("x").status_code, 403)
        self.assertEqual(NotFoundError("Task").status_code, 404)

    def test_to_dict(self):
        error = ConflictError("User already exists.", details={"email": "a@x.com"})
        self.assertEqual(error.to_dict(), {
            "detail": "User already exists.",
            "code": "CONFLICT",
            "details": {"email": "a@x.com"},
        })

    def test_not_found_names_resource(self):
        error = NotFoundError("Task", 42)
        self.assertEqual(str(error), "Task not found")
        self.assertEqual(error.to_dict()["details"], {"id": "42"})

    def test_to_dict_omits_empty_details(self):
        self.assertNotIn("details", AuthError("Invalid token").to_dict())

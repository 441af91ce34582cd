# constants/messages.py

class MESSAGE:
    USER_CREATED = "User created successfully"
    AUTH_SUCCESS = "Login successful"
    LOGOUT_SUCCESS = "Logout successful"
    SESSION_FOUND = "Session retrieved successfully"
    TOKEN_REFRESHED = "Token refreshed successfully"

    FORM_CREATED = "Form created successfully"
    FORM_UPDATED = "Form updated successfully"
    FORM_DELETED = "Form deleted successfully"
    FORM_FOUND = "Form retrieved successfully"
    FORMS_FOUND = "Forms retrieved successfully"
    RESULTS_FOUND = "Results retrieved successfully"

    BUILDER_SESSION_CREATED = "Builder session created"
    BUILDER_SESSION_FOUND = "Builder session retrieved"
    BUILDER_SESSION_CLOSED = "Builder session closed"
    BUILDER_UPDATED = "Builder updated"
    PALETTE_FOUND = "Field palette retrieved"

    SUBMISSION_CREATED = "Thank you! Your response has been recorded."

# constants/error.py
class ERROR:
    INVALID_CREDENTIALS = "Invalid email or password"
    EMAIL_ALREADY_EXISTS = "Email already exists"
    INTERNAL_ERROR = "Something went wrong. Please try again later"
    UNAUTHORIZED = "Authentication failed. Token is missing or invalid."
    INVALID_REFRESH_TOKEN = "Refresh token is invalid or expired"

    # Request field messages, looked up as REQUIRED_<FIELD>
    REQUIRED_TITLE = "Form title is required"
    REQUIRED_EMAIL = "Please provide a valid email address."
    REQUIRED_PASSWORD = "Password is required."
    REQUIRED_TYPE = "Please choose a valid type."

    # Publishing
    FORM_TITLE_REQUIRED = "Form title is required"
    FORM_FIELDS_REQUIRED = "You need to add at least one field"
    FORM_QUESTIONS_REQUIRED = "You need to add at least one question"
    QUESTION_TITLE_REQUIRED = "All questions must have a title"
    QUESTION_OPTIONS_REQUIRED = "Multiple choice questions must have at least 2 options"
    FORM_CREATE_FAILED = "Failed to create form"
    FORM_UPDATE_FAILED = "Failed to update form"
    FORM_DELETE_FAILED = "Failed to delete form"
    FORM_VERSION_CONFLICT = "This form was changed by another session. Reload it and try again."

    # Lookups
    FORM_NOT_FOUND = "Form not found"
    FORM_EDIT_FORBIDDEN = "Form not found or you do not have permission to edit it"
    FORM_VIEW_FORBIDDEN = "Form not found or you do not have permission to view it"
    FORM_UNAVAILABLE = "Form not found or no longer available"
    FORM_LOAD_FAILED = "Failed to load form data"

    # Builder
    BUILDER_SESSION_NOT_FOUND = "Builder session not found"
    BUILDER_FIELD_NOT_FOUND = "Field not found"
    BUILDER_INVALID_INDEX = "Field index out of range"
    BUILDER_NO_SELECTION = "No field is selected"
    BUILDER_SAVE_IN_PROGRESS = "This form is already being saved"

    # Public submissions
    FIELD_REQUIRED = "This field is required"
    SELECTION_REQUIRED = "Please select at least one option"
    SUBMIT_FAILED = "Failed to submit form. Please try again."
    SUBMIT_IN_PROGRESS = "This form is already being submitted"

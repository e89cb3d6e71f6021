"""WTForms forms, validated from form posts or JSON bodies."""


def form_errors(form):
    """First error message per field, for JSON responses."""
    return {name: messages[0] for name, messages in form.errors.items() if messages}

# TastyDash - WSGI entry point
# Run locally with: flask --app app run
# Select a configuration with FLASK_CONFIG (development, production, testing)

from tastydash import create_app

app = create_app()

if __name__ == '__main__':
    app.run()

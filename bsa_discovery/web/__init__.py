"""
Web server module for the BSA Discovery Questionnaire wizard.

Usage:
    from bsa_discovery.web.server import app

    # Run with uvicorn:
    # uvicorn bsa_discovery.web.server:app --host 0.0.0.0 --port 8000
"""

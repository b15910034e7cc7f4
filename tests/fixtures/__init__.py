"""
Test fixtures for the Email Threat Inference Layer.

Contains sample data for testing:
- phishing_email.eml: Raw MIME phishing email (tracking pixel, script redirect)
- newsletter_email.txt: Legitimate marketing newsletter with unsubscribe link
- valid_model_response.json: Model output conforming to the analysis schema
"""

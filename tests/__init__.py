"""
Test suite for the Clinic Appointment API.

Covers session tokens, the patient/admin cookie guards, registration and
login, appointment booking and status updates, and the message inbox.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"

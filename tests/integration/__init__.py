"""
Integration tests for the inbound email relay.

These tests use mocked AWS services to run the full Lambda flow
from SNS event to SES forwards and webhook posts.
"""

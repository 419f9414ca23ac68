"""
Integration tests for the POST dispatcher.

Full dispatch runs through the httpx transport against an in-memory
server (httpx.MockTransport), marked with @pytest.mark.integration.
"""

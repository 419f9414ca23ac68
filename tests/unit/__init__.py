"""
Unit tests for the POST dispatcher.

Test individual components in isolation:
- Data models and settings
- Retry policy, linear backoff and the attempt loop
- Request generator, result collectors and the concurrency pool
- httpx transport (over httpx.MockTransport)
- CLI option handling
"""

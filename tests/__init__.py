"""
StudyBuddy Speech Test Suite

Tests for:
- Speech providers (local engine, ElevenLabs, Google, Azure)
- Speech service and controller
- Speech proxy API endpoints
- Text sanitization and settings persistence

Run tests with:
    pytest tests/ -v
"""

"""VoiceBridge: live speech translation service."""

"""Configuration loading, validation and obfuscator construction."""

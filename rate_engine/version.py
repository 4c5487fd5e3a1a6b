"""Calculator version, stamped on every computed quote."""

VERSION = "2025.11.0"

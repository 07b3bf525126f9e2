# Shared helpers for the gateway backend

"""Utility helpers for ledgercache."""

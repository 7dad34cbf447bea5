"""Framework adapters for ledgercache."""

"""Integration adapters: Telegram transport, Anthropic, and Shopify."""

"""Adaptadores: transporte HTTP, firma de requests y clientes de push."""

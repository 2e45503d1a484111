"""Core: configuración, logging, modelos de dominio y servicios."""

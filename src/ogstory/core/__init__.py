"""Core: configuración, dominio, contratos y orquestación del pipeline."""

"""Regime strategies: Simples Nacional, Lucro Presumido and the CBS/IBS transition."""

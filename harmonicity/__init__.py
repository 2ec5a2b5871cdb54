"""A polyphonic synthesizer engine with multi-oscillator voices and ADSR envelopes."""

__version__ = "0.1.0"
[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "harmonicity"
version = "0.1.0"
description = "A small polyphonic synthesizer engine with multi-oscillator voices and exponential ADSR envelopes"
requires-python = ">=3.10"
dependencies = []
keywords = ["synthesizer", "audio", "dsp", "oscillator", "envelope", "midi"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Sound/Audio :: Sound Synthesis",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["harmonicity"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

#
#    Copyright (c) 2009-2023 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your full rights.
#
"""Names of the Davis station models, keyed by the model code the console reports"""

UNKNOWN_MODEL = "Unknown model"

model_dict = {
    0: "Wizard III",
    1: "Wizard II",
    2: "Monitor",
    3: "Perception",
    4: "GroWeather",
    5: "Energy Environmonitor",
    6: "Health Environmonitor",
    16: "Vantage Pro",
    17: "Vantage Vue",
}


def decode(code):
    """Return the name of the model with the given code. Never fails."""
    return model_dict.get(code, UNKNOWN_MODEL)

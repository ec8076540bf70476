"""
Centralized constants of the nucleon energy correlator analysis.
"""

# Binning definitions: {name: {title, bins, low, high}}
AXES = {
    "ene": {"title": "E [GeV]", "bins": 200, "low": 0.0, "high": 200.0},
    "rap": {"title": "y = ln tan(#theta/2)", "bins": 200, "low": -15.0, "high": 5.0},
    "weight": {"title": "E/E_{p}", "bins": 30, "low": -1.0, "high": 2.0},
    "x": {"title": "x_{B}", "bins": 60, "low": -1.0, "high": 2.0},
    "lnx": {"title": "ln x_{B}", "bins": 100, "low": -50.0, "high": 50.0},
}

# Histogram definitions: {name: {axes, y_title}}
HISTOGRAMS = {
    "hNEC": {"axes": ["rap"], "y_title": "#LTNEC#GT"},
    "hRapPar": {"axes": ["rap"]},
    "hEnePar": {"axes": ["ene"]},
    "hEneNuc": {"axes": ["ene"]},
    "hEneFrac": {"axes": ["weight"]},
    "hXBRec": {"axes": ["x"]},
    "hXBGen": {"axes": ["x"]},
    "hLogXBRec": {"axes": ["lnx"]},
    "hLogXBGen": {"axes": ["lnx"]},
    "hRapVsEnePar": {"axes": ["rap", "ene"], "z_title": "counts"},
}

# Histogram -> (value quantities, weight quantity)
FILLS = {
    "hXBRec": (["xbRec"], None),
    "hXBGen": (["xbGen"], None),
    "hLogXBRec": (["lnxbRec"], None),
    "hLogXBGen": (["lnxbGen"], None),
    "hRapPar": (["parRap"], None),
    "hEnePar": (["parEne"], None),
    "hEneNuc": (["nucEne"], None),
    "hEneFrac": (["parWeight"], None),
    "hNEC": (["parRap"], "parWeight"),
    "hRapVsEnePar": (["parRap", "parEne"], None),
}

#!/usr/bin/env python3
# This file is Copyright (c) 2010 by the GPSD project
# BSD terms apply: see the file COPYING in the distribution root for details.
#
# Installs the aivdm package and the aisdecode filter.

from setuptools import setup

import os
import re

# The version lives in one place, the package itself.
here = os.path.realpath(os.path.dirname(__file__))
with open(os.path.join(here, 'aivdm', '__init__.py')) as init:
    version = re.findall(r"^__version__ = '([^']*)'", init.read(), re.M)[0]

setup( name="aivdm",
       version=version,
       description='Decoder for AIS messages in AIVDM/AIVDO sentences',
       author='the GPSD project',
       license="BSD",
       python_requires=">=3.6",
       packages = ['aivdm'],
       scripts = ['aisdecode'],
       extras_require = {'test': ['pytest']},
     )

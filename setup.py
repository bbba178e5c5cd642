#!/usr/bin/env python
#
#    vproweather --- Query a Davis Vantage weather station console
#
#    Copyright (c) 2009-2021 Tom Keffer <tkeffer@gmail.com>
#
#    See the file LICENSE.txt for your full rights.
#
"""Setup file for vproweather."""

import os.path
import re
import sys

from setuptools import setup

if sys.version_info < (3, 7):
    sys.exit('vproweather requires Python V3.7 or greater.')

this_dir = os.path.abspath(os.path.dirname(__file__))


def get_version():
    """Read the version out of the vantage package, without importing it."""
    with open(os.path.join(this_dir, 'src', 'vantage', '__init__.py')) as fd:
        match = re.search(r'^__version__\s*=\s*"([^"]+)"', fd.read(), re.M)
    return match.group(1)


if __name__ == "__main__":
    setup(name='vproweather',
          version=get_version(),
          description='Query a Davis Vantage weather station console over a serial port',
          long_description="vproweather wakes up a Davis Vantage Pro, Vantage Pro2, or Vantage "
                           "Vue console, then queries its firmware version or model, or turns "
                           "its backlight on or off.",
          author='Tom Keffer',
          author_email='tkeffer@gmail.com',
          license='GPLv3',
          python_requires='>=3.7',
          py_modules=['vproweather'],
          package_dir={'': 'src'},
          packages=['vantage',
                    'vpcfg',
                    'vputil'],
          install_requires=['configobj>=5.0',
                            'pyserial>=3.4'],
          extras_require={
              'test': ['pytest>=7'],
          },
          entry_points={
              'console_scripts': [
                  'vproweather=vproweather:main',
              ],
          },
          data_files=[('share/vproweather', ['vproweather.conf'])],
          )

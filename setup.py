#!/usr/bin/python3

from setuptools import setup


with open("README.md", "r") as f:
    long_description = f.read()


setup(name='allotment',
      version='0.1.0',
      description='Python module for planning disk partitioning and LVM layouts',
      long_description=long_description,
      long_description_content_type="text/markdown",
      packages=['allotment', 'allotment.devices', 'allotment.devicelibs', 'allotment.formats',
                'allotment.planned', 'allotment.proposal'],
      install_requires=[],
      extras_require={"test": ["pytest"]},
      classifiers=["Development Status :: 3 - Alpha",
                   "Intended Audience :: Developers",
                   "License :: OSI Approved :: GNU General Public License v2 or later (GPLv2+)",
                   "Programming Language :: Python :: 3",
                   "Operating System :: POSIX :: Linux"]
     )

# Copyright 2024 PerFlow Authors
# Licensed under the Apache License, Version 2.0

"""
setup.py for loadflow

Installation:
    pip install .

Development installation:
    pip install -e .[test]
"""

from setuptools import setup, find_packages


# Read long description from README
long_description = """
# loadflow

Page-load dependency-graph simulation and trace serialization.

## Features

- Build a dependency graph from captured network requests and CPU tasks
- Simulate the page load under CPU and network throttling profiles
- Find the longest dependency chain and per-node tree context
- Write the simulated timeline as a trace-event JSON file

## Quick Start

```python
from loadflow import GraphBuilder, LoadSimulator, ThrottlingConfig, saveTraceOfGraph

graph = GraphBuilder().build(network_records, cpu_records)
profile = ThrottlingConfig.get_instance().get_profile('mobileSlow4G')
result = LoadSimulator(profile).simulate(graph)
print(f"Simulated load: {result.getTotalDuration():.1f} ms")

saveTraceOfGraph(graph, result.getTiming())
```
"""

setup(
    name='loadflow',
    version='0.1.0',
    author='PerFlow Authors',
    author_email='',
    description='Page-load dependency-graph simulator and trace serializer',
    long_description=long_description,
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'numpy',
        'psutil',
    ],
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.8',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: Apache Software License',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.8',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Software Development :: Libraries',
        'Topic :: System :: Monitoring',
    ],
    keywords='performance analysis page load simulation trace',
)

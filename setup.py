#! /usr/bin/env python

import os
from collections import defaultdict

from setuptools import setup, find_packages


def load_version():
    """Executes querybag/version.py in a globals dictionary and return it.
    """
    globals_dict = {}
    with open(os.path.join('querybag', 'version.py')) as fp:
        exec(fp.read(), globals_dict)
    return globals_dict


# Make sources available using relative paths from this file's directory.
os.chdir(os.path.dirname(os.path.abspath(__file__)))

_VERSION_GLOBALS = load_version()
DISTNAME = 'querybag'
DESCRIPTION = 'Query by bagging active learning'
with open('README.md') as fp:
    LONG_DESCRIPTION = fp.read()
LICENSE = 'Apache 2.0'
VERSION = _VERSION_GLOBALS['__version__']


if __name__ == "__main__":
    install_requires = []
    extras_require = defaultdict(list)

    for mod, meta in _VERSION_GLOBALS['DEPENDENCIES_METADATA']:
        dep_str = '%s>=%s' % (mod, meta['min_version'])
        if 'extra_options' in meta:
            for extra_option in meta['extra_options']:
                extras_require[extra_option].append(dep_str)
            extras_require['all'].append(dep_str)
        else:
            install_requires.append(dep_str)

    setup(name=DISTNAME,
          description=DESCRIPTION,
          license=LICENSE,
          version=VERSION,
          long_description=LONG_DESCRIPTION,
          long_description_content_type='text/markdown',
          zip_safe=False,  # the package can run out of an .egg file
          classifiers=[
              'Intended Audience :: Science/Research',
              'Intended Audience :: Developers',
              'Programming Language :: Python',
              'Topic :: Scientific/Engineering',
              'Operating System :: Microsoft :: Windows',
              'Operating System :: POSIX',
              'Operating System :: Unix',
              'Operating System :: MacOS',
              'Programming Language :: Python :: 3',
          ],
          packages=find_packages(include=['querybag', 'querybag.*']),
          package_data={},
          python_requires='>=3.7',
          install_requires=install_requires,
          extras_require=extras_require)

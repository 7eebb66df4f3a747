#!/usr/bin/env python3

from setuptools import setup

setup(
    name="pngme",
    version="1.0.0",
    description='Hide messages in PNG files, inside chunks of their own',
    long_description="""A pure python package and command line tool to embed, extract, remove
    and list custom chunks in PNG files""",
    license='GPL-3.0',
    classifiers=[
        #   3 - Alpha
        #   4 - Beta
        #   5 - Production/Stable
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Libraries',
        'License :: OSI Approved :: GNU General Public License (GPL)',
        'Programming Language :: Python :: 3',
    ],
    keywords='png library steganography chunk',
    packages=["pngme"],
    install_requires=['requests'],
    extras_require={
        'test': ['pytest', 'Pillow'],
    },
    entry_points={
        'console_scripts': ['pngme=pngme.cli:main'],
    },
    python_requires='>=3.8',
    package_data={},
    data_files=[],
)

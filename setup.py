from setuptools import setup, find_packages

setup(
    name='geoselect',
    version='0.1.0',
    description='Select the regions that contain a set of query points',
    author='Matthew Whittle',
    author_email='matthewjwhittle@gmail.com',
    packages=find_packages(include=['geoselect', 'geoselect.*']),
    python_requires='>=3.9',
    install_requires=[
        'geopandas>=1.0',
        'shapely>=2.0',
        'pandas',
        'numpy',
        'pyarrow',
        'pydantic>=2',
        'pyyaml',
        'typer',
        'typing_extensions',
    ],
    extras_require={
        'test': ['pytest'],
    },
    entry_points={
        'console_scripts': [
            'geoselect=geoselect.cli:app',
        ],
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python :: 3',
    ],
)

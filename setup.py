import setuptools

with open("README.md", "r") as fh:
    long_description = fh.read()

with open("bigratio/version.py", "r") as fh:
    version = fh.read().strip().strip('"')

setuptools.setup(
    name="bigratio",
    version=version,
    description="Exact big integers and rational numbers, with series for ln, exp, pow, e, ln 2 and pi.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=setuptools.find_packages(),
    platforms=['any'],
    python_requires='>=3.8',
    install_requires=[],
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering :: Mathematics",
        "Topic :: Software Development :: Libraries",
            # arbitrary precision
            # rational arithmetic
            # exact computation
    ],
)

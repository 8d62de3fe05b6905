from setuptools import setup

setup(name = 'cloudfree',
    version = '0.1.0.dev',
    description = 'Cloud scoring, cloud masking and time series smoothing for multispectral raster imagery',
    classifiers = [
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering',
        'Topic :: Scientific/Engineering :: GIS'
    ],
    keywords = ['cloud masking ndvi time series remote sensing raster sentinel landsat'],
    packages = ['cloudfree', 'cloudfree.test'],
    python_requires = '>=3.6',
    install_requires = [
        'numpy >= 1.17.0',
        'scipy >= 0.19.0'
    ],
    extras_require = {
        'gdal': ['GDAL >= 2.1.0'],
        'test': ['pytest']
    }
    )

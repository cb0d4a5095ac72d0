#!/usr/bin/env python

if __name__ == '__main__':
    import setuptools

    setuptools.setup(
        name='addrspace',
        version='0.1.0',
        description='Sparse 32-bit byte-addressable address space',
        license='BSD-2-Clause',
        package_dir={'': 'src'},
        packages=setuptools.find_packages('src'),
        python_requires='>=3.7',
        install_requires=[
            'bytesparse>=1.0.0',
        ],
        extras_require={
            'testing': [
                'pytest',
            ],
        },
    )

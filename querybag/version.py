"""
querybag version and minimal versions of its dependencies
"""

__version__ = '0.1.0'

# Core dependencies first, then extras
DEPENDENCIES_METADATA = (
    ('numpy', {'min_version': '1.17'}),
    ('scipy', {'min_version': '1.4'}),
    ('scikit-learn', {'min_version': '0.23'}),
    ('joblib', {'min_version': '0.14'}),
    ('packaging', {'min_version': '20.0'}),
    ('pytest', {'min_version': '6.0', 'extra_options': ['test']}),
)

package_to_module = {
    'scikit-learn': 'sklearn',
}


def check_modules(extra_option=None, import_module=None, strict=True):
    """Check that module is installed with a recent enough version

    Args:
        extra_option: If None, check based modules, otherwise checks
            modules for the specified option. None by default.
        import_module: If the check is made in a specific module, adds
            it to error messages. Empty by default.
        strict: If True (default), raises an error in case of problem.
            Otherwise returns a boolean indicating if the set up is ok.
    """
    from packaging.version import Version, InvalidVersion

    import_module = '.' + import_module if import_module else ''

    for package_name, metadata in DEPENDENCIES_METADATA:

        if not ((extra_option is None and 'extra_options' not in metadata)
                or (extra_option in metadata.get('extra_options', []))):
            continue

        min_version = metadata['min_version']
        try:
            module_name = package_to_module.get(package_name, package_name)
            module = __import__(module_name)
        except ImportError as exc:
            user_friendly_info = (
                'Module "{0}" could not be found. '
                'Please install it properly to use querybag{1}.'.format(
                    package_name, import_module))
            exc.args += (user_friendly_info,)
            exc.msg += '. ' + user_friendly_info
            if strict:
                raise
            else:
                return False

        # Avoid choking on modules with no __version__ attribute
        module_version = getattr(module, '__version__', '0.0.0')

        try:
            version_too_old = Version(module_version) < Version(min_version)
        except InvalidVersion:
            version_too_old = False

        if version_too_old:
            message = (
                'A {package_name} version of at least {minimum_version} '
                'is required to use querybag{import_module}. '
                '{module_version} was found. '
                'Please upgrade {package_name}').format(
                    package_name=package_name,
                    minimum_version=min_version,
                    module_version=module_version,
                    import_module=import_module)

            if strict:
                raise ImportError(message)
            else:
                return False
    if not strict:
        return True

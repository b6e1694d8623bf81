import pytest

from backuper.template import substitute

ENV = {'HOME': '/home/me', 'DB_NAME': 'prod', 'LOOP': '${HOME}'}


def sub(text, environ=None):
    return substitute(text, 'abcd1234', 'db', '/tmp/backup-db-abcd1234-x',
                      ENV if environ is None else environ)


@pytest.mark.parametrize('text', [
    '',
    'pg_dump mydb > /tmp/out.sql',
    'echo $HOME and $(date)',
    'echo {BACKUP_ID} $BACKUP_ID',
])
def testNoTokensIsIdentity(text):
    assert sub(text) == text


@pytest.mark.parametrize('text, expected', [
    ('${BACKUP_ID}', 'abcd1234'),
    ('${BACKUP_NAME}', 'db'),
    ('${TEMP_DIR}/out.txt', '/tmp/backup-db-abcd1234-x/out.txt'),
    ('${BACKUP_NAME}-${BACKUP_ID}.sql', 'db-abcd1234.sql'),
    ('pg_dump ${DB_NAME} > ${TEMP_DIR}/${DB_NAME}.sql',
     'pg_dump prod > /tmp/backup-db-abcd1234-x/prod.sql'),
])
def testSubstitution(text, expected):
    assert sub(text) == expected


def testUndefinedEnvTokenIsLeftAlone():
    assert sub('echo ${DOES_NOT_EXIST} ${HOME}') == 'echo ${DOES_NOT_EXIST} /home/me'


def testSubstitutedValueIsNotRescanned():
    assert sub('${LOOP}') == '${HOME}'


def testBuiltinsWinOverEnvironment():
    assert sub('${BACKUP_ID}', {'BACKUP_ID': 'from-env'}) == 'abcd1234'


def testUsesOnlyInjectedMapping(monkeypatch):
    monkeypatch.setenv('ONLY_IN_PROCESS_ENV', 'leak')
    assert sub('${ONLY_IN_PROCESS_ENV}', {}) == '${ONLY_IN_PROCESS_ENV}'

"""
Migration inicial para o domínio de Solicitações.

Cria a tabela:
- solicitacao: registros do quadro (histórico tipado em JSON)
"""

from django.db import migrations, models
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='SolicitacaoModel',
            fields=[
                ('id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    editable=False,
                    help_text='UUID único da solicitação'
                )),
                ('protocolo', models.CharField(
                    max_length=64,
                    db_index=True,
                    help_text='Código legível 7BD-...'
                )),
                ('departamento', models.CharField(max_length=100, db_index=True)),
                ('email', models.EmailField(max_length=254, null=True, blank=True)),
                ('tipo_solicitacao', models.CharField(max_length=200, blank=True, default='')),
                ('descricao', models.TextField()),
                ('veiculacao', models.JSONField(default=list, blank=True)),
                ('data_entrega', models.DateField(db_index=True)),
                ('horario_entrega', models.TimeField(null=True, blank=True)),
                ('observacoes', models.TextField(blank=True, default='')),
                ('arquivo_url', models.CharField(max_length=500, null=True, blank=True)),
                ('status', models.CharField(
                    max_length=30,
                    choices=[
                        ('todo', 'Pendente'),
                        ('in-progress', 'Em Progresso'),
                        ('video-materiais', 'Vídeo/Materiais'),
                        ('cobertura-eventos', 'Cobertura de Eventos'),
                        ('arte', 'Arte'),
                        ('fazendo', 'Fazendo'),
                        ('aprovacao', 'A Aprovar'),
                        ('parado', 'Parado'),
                        ('done', 'Concluído'),
                        ('archived', 'Arquivado'),
                    ],
                    default='todo',
                    db_index=True,
                )),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now, db_index=True)),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('iniciado_em', models.DateTimeField(null=True, blank=True)),
                ('concluido_em', models.DateTimeField(null=True, blank=True)),
                ('arquivado_em', models.DateTimeField(null=True, blank=True)),
                ('historico', models.JSONField(
                    default=list,
                    blank=True,
                    help_text='Eventos {ocorrido_em, tipo, payload} em ordem'
                )),
            ],
            options={
                'verbose_name': 'Solicitação',
                'verbose_name_plural': 'Solicitações',
                'db_table': 'solicitacao',
                'ordering': ['-criado_em'],
                'indexes': [
                    models.Index(fields=['status', 'criado_em'], name='solicitacao_status_criado_idx'),
                    models.Index(fields=['status', 'data_entrega'], name='solicitacao_status_entrega_idx'),
                ],
            },
        ),
    ]

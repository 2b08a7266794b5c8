from .reconciliacao_schema import (
    DiaReconciliacaoResponse,
    ResumoReconciliacao,
    FalhaDia,
    ReconciliacaoResponse
)

from .arquivo_schema import (
    MetricasArquivo,
    UploadResponse,
    UltimoMesResponse
)

from .qualidade_schema import (
    AnomaliaResponse,
    ResumoAnomalias,
    AnomaliasResponse
)

from .relatorio_schema import (
    KpiResumoResponse,
    PontoReceita,
    KpiDiarioResponse,
    ClienteReceita,
    TopClientesResponse,
    ProdutoReceita,
    TopProdutosResponse,
    TotaisIva,
    TotaisTaxaIva,
    DiaIva,
    RelatorioIvaResponse
)
